"""
Matplotlib configuration for report charts.

Usage:
    from tabstats.ploting.plotting_config import setup_publication_style, PALETTES

    setup_publication_style()                  # default theme
    setup_publication_style(theme='minimal')   # any key of THEMES

    colors = PALETTES['prism_rain']

All themes use colorblind-friendly palettes and leave the grid off; charts
add their own light value-axis grid through apply_grid().
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import matplotlib as mpl
import matplotlib.pyplot as plt
from matplotlib import cycler

logger = logging.getLogger(__name__)

# =============================================================================
# Color Palettes (Colorblind-Friendly)
# =============================================================================

PALETTES = {
    # Tableau (matplotlib default cycle)
    'default': [
        '#1f77b4', '#ff7f0e', '#2ca02c', '#d62728', '#9467bd',
        '#8c564b', '#e377c2', '#7f7f7f', '#bcbd22', '#17becf',
    ],

    # High contrast, vibrant
    'prism_rain': [
        '#e41a1c', '#377eb8', '#4daf4a', '#984ea3', '#ff7f00',
        '#00bfc4', '#f781bf', '#ffd92f', '#a65628', '#8dd3c7',
    ],

    # Understated (Nord)
    'minimal': [
        '#5E81AC', '#BF616A', '#A3BE8C', '#D08770', '#B48EAD',
        '#88C0D0', '#EBCB8B', '#2E3440',
    ],
}

# Reference line drawn at the mean bucket count
MEAN_LINE_COLOR = '#d62728'

# =============================================================================
# Theme Definitions
# =============================================================================

THEMES = {
    'default': {
        'font.size': 11,
        'axes.labelsize': 11,
        'axes.titlesize': 13,
        'axes.titleweight': 'bold',
        'xtick.labelsize': 10,
        'ytick.labelsize': 10,
        'legend.fontsize': 10,
        'figure.figsize': (10, 5),
        'lines.linewidth': 1.8,
        'lines.markersize': 6,
        'axes.linewidth': 1.0,
        'axes.spines.top': False,
        'axes.spines.right': False,
        'axes.grid': False,
        'legend.frameon': False,
        'axes.prop_cycle': cycler(color=PALETTES['default']),
    },

    'prism_rain': {
        'font.size': 11,
        'font.sans-serif': ['Source Sans Pro', 'DejaVu Sans', 'Arial'],
        'axes.labelsize': 12,
        'axes.titlesize': 14,
        'axes.labelweight': 'bold',
        'axes.titleweight': 'bold',
        'xtick.labelsize': 10,
        'ytick.labelsize': 10,
        'legend.fontsize': 10,
        'figure.figsize': (11, 6),
        'lines.linewidth': 2.0,
        'lines.markersize': 8,
        'axes.linewidth': 1.5,
        'xtick.major.width': 1.5,
        'ytick.major.width': 1.5,
        'axes.grid': False,
        'legend.frameon': False,
        'axes.prop_cycle': cycler(color=PALETTES['prism_rain']),
    },

    'minimal': {
        'font.size': 10,
        'axes.labelsize': 10,
        'axes.titlesize': 11,
        'xtick.labelsize': 9,
        'ytick.labelsize': 9,
        'legend.fontsize': 9,
        'figure.figsize': (8, 4.5),
        'lines.linewidth': 1.2,
        'lines.markersize': 5,
        'axes.linewidth': 0.8,
        'axes.spines.top': False,
        'axes.spines.right': False,
        'axes.grid': False,
        'legend.frameon': False,
        'axes.prop_cycle': cycler(color=PALETTES['minimal']),
    },

    # Slides
    'presentation': {
        'font.size': 14,
        'axes.labelsize': 16,
        'axes.titlesize': 18,
        'xtick.labelsize': 14,
        'ytick.labelsize': 14,
        'legend.fontsize': 14,
        'figure.figsize': (12, 7),
        'lines.linewidth': 3.0,
        'lines.markersize': 10,
        'axes.linewidth': 2.0,
        'xtick.major.width': 2.0,
        'ytick.major.width': 2.0,
        'axes.grid': False,
        'axes.prop_cycle': cycler(color=PALETTES['prism_rain']),
    },
}

# =============================================================================
# Helper Functions
# =============================================================================


def setup_publication_style(theme='default', dpi=200):
    """
    Reset matplotlib and apply a theme.

    Parameters
    ----------
    theme : str, default='default'
        Key of THEMES ('default', 'prism_rain', 'minimal', 'presentation')
    dpi : int, default=200
        DPI for saved figures

    Notes
    -----
    Modifies global rcParams. Call once before creating figures.
    """
    if theme not in THEMES:
        available = ', '.join(THEMES.keys())
        raise ValueError(f"Theme '{theme}' not found. Available themes: {available}")

    plt.rcdefaults()
    plt.rcParams.update(THEMES[theme])

    plt.rcParams['savefig.dpi'] = dpi
    plt.rcParams['figure.dpi'] = 100
    plt.rcParams['savefig.bbox'] = 'tight'
    plt.rcParams['savefig.pad_inches'] = 0.1

    logger.debug(f"Applied '{theme}' plot style (DPI: {dpi})")


def get_color_cycle(palette='default', n_colors=None):
    """
    Colors from a palette, cycled when `n_colors` exceeds its length.

    >>> get_color_cycle('prism_rain', n_colors=3)
    ['#e41a1c', '#377eb8', '#4daf4a']
    """
    if palette not in PALETTES:
        available = ', '.join(PALETTES.keys())
        raise ValueError(f"Palette '{palette}' not found. Available: {available}")

    colors = PALETTES[palette]
    if n_colors is None:
        return colors
    return [colors[i % len(colors)] for i in range(n_colors)]


def save_figure(fig, filepath, dpi=200, formats: Optional[Iterable[str]] = None, **kwargs) -> List[Path]:
    """
    Save a figure once per format; `filepath` is taken without its extension.

    Returns the written paths.
    """
    if formats is None:
        formats = ['png']

    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    save_kwargs = {
        'dpi': dpi,
        'bbox_inches': 'tight',
        'facecolor': 'white',
        'edgecolor': 'none',
    }
    save_kwargs.update(kwargs)

    saved_files = []
    for fmt in formats:
        output_path = filepath.with_suffix(f'.{fmt}')
        fig.savefig(output_path, format=fmt, **save_kwargs)
        saved_files.append(output_path)
        logger.info(f"Saved figure to [path]{output_path}[/path]")
    return saved_files


def apply_grid(ax, axis='y', alpha=0.6, linestyle=':', linewidth=0.8):
    """Light grid on the value axis only."""
    ax.grid(True, axis=axis, alpha=alpha, linestyle=linestyle, linewidth=linewidth)
    ax.set_axisbelow(True)


def set_spine_visibility(ax, top=False, right=False, left=True, bottom=True):
    ax.spines['top'].set_visible(top)
    ax.spines['right'].set_visible(right)
    ax.spines['left'].set_visible(left)
    ax.spines['bottom'].set_visible(bottom)


class PlotStyle:
    """
    Context manager for a temporary theme.

    >>> with PlotStyle('minimal'):
    ...     fig, ax = plt.subplots()
    """

    def __init__(self, theme='default', dpi=200):
        self.theme = theme
        self.dpi = dpi
        self._ctx = None

    def __enter__(self):
        self._ctx = mpl.rc_context()
        self._ctx.__enter__()
        setup_publication_style(self.theme, dpi=self.dpi)
        return self

    def __exit__(self, exc_type, exc, tb):
        self._ctx.__exit__(exc_type, exc, tb)
        return False
