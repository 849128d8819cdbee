"""
Unified Color Mapping System for composition PCA plots
Light theme only - simplified color system
"""


def get_unified_color_schemes():
    """
    Unified color schemes for light theme only

    Returns:
        dict: Complete color scheme with categorical colors and plot styling
    """

    # black, red, green, blue, orange, purple, brown, hotpink, gray, olive,
    # darkcyan, magenta, goldenrod, navy, darkgreen, darkred, indigo, coral,
    # teal, chocolate
    light_theme_colors = [
        '#000000', '#FF0000', '#008000', '#0000FF', '#FFA500', '#800080',
        '#A52A2A', '#FF69B4', '#808080', '#808000', '#008B8B', '#FF00FF',
        '#DAA520', '#000080', '#006400', '#8B0000', '#4B0082', '#FF7F50',
        '#008080', '#D2691E'
    ]

    return {
        # Plot styling colors
        'background': 'white',
        'paper': 'white',
        'text': 'black',
        'grid': '#e6e6e6',
        'arrow': '#B22222',
        'arrow_faded': '#C8C8C8',

        # Categorical colors for conditions
        'categorical_colors': light_theme_colors,

        # Theme identifier
        'theme': 'light'
    }


def create_categorical_color_map(unique_values):
    """
    Create a color mapping for categorical variables

    Args:
        unique_values (list): List of unique categorical values

    Returns:
        dict: Mapping of values to hex colors, assigned in sorted order
    """
    colors = get_unified_color_schemes()['categorical_colors']

    color_discrete_map = {}

    for i, val in enumerate(sorted(unique_values, key=str)):
        if i < len(colors):
            color_discrete_map[val] = colors[i]
        else:
            # Golden-angle hue steps keep extra colors distinct
            color_discrete_map[val] = _hsl_to_hex((i * 137) % 360, 0.70, 0.50)

    return color_discrete_map


def hex_to_rgba(hex_color, alpha=1.0):
    """
    Convert '#RRGGBB' to a Plotly 'rgba(r, g, b, a)' string

    Args:
        hex_color (str): Color such as '#FF0000'
        alpha (float): Opacity between 0 and 1

    Returns:
        str: rgba color string
    """
    h = hex_color.lstrip('#')
    if len(h) != 6:
        raise ValueError(f"Expected a #RRGGBB color, got {hex_color!r}")
    r, g, b = (int(h[i:i + 2], 16) for i in (0, 2, 4))
    return f'rgba({r}, {g}, {b}, {alpha})'


def _hsl_to_hex(hue, saturation, lightness):
    c = (1 - abs(2 * lightness - 1)) * saturation
    x = c * (1 - abs((hue / 60) % 2 - 1))
    m = lightness - c / 2
    sector = int(hue // 60) % 6
    r, g, b = [(c, x, 0), (x, c, 0), (0, c, x), (0, x, c), (x, 0, c), (c, 0, x)][sector]
    return '#{:02X}{:02X}{:02X}'.format(*(int(round((v + m) * 255)) for v in (r, g, b)))
