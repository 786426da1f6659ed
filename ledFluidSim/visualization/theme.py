# -- Visualization Theme -- #

'''
Centralized dark-mode theme for the LED frame plots.

Sean Bowman [10/19/2026]
'''

# Plotly template
TEMPLATE = 'plotly_dark'

BLUE = '#42A5F5'
RED = '#EF5350'
GREEN = '#66BB6A'

# Unlit LED to fully lit LED
LED_COLORSCALE = [
    [0.0, '#101010'],
    [0.5, '#1565C0'],
    [1.0, '#E3F2FD'],
]
