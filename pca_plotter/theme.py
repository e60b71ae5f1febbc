"""
Theme and stylesheet for the PCA Plotter.

Provides the dark Catppuccin Qt stylesheet and the matplotlib colours
for the dark (GUI) and light (export) chart themes.  Chart themes are
applied per figure rather than through global rcParams so that a
light export figure can be drawn while the GUI canvas stays dark.
"""

from .constants import DARK_COLORS, PLOT_STYLE_DARK, PLOT_STYLE_LIGHT


def get_dark_stylesheet() -> str:
    """Generate the dark mode Qt stylesheet."""
    c = DARK_COLORS
    return f"""
    QMainWindow, QWidget {{
        background-color: {c['bg']};
        color: {c['fg']};
        font-size: 13px;
    }}
    QGroupBox {{
        border: 1px solid {c['border']};
        border-radius: 6px;
        margin-top: 12px;
        padding-top: 16px;
        font-weight: bold;
        color: {c['accent']};
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 12px;
        padding: 0 6px;
    }}
    QPushButton {{
        background-color: {c['bg_widget']};
        color: {c['fg']};
        border: 1px solid {c['border']};
        border-radius: 4px;
        padding: 6px 16px;
        min-height: 24px;
    }}
    QPushButton:hover {{
        background-color: {c['selection']};
        border-color: {c['accent']};
    }}
    QPushButton:checked, QPushButton:pressed {{
        background-color: {c['accent']};
        color: {c['bg']};
    }}
    QPushButton:disabled {{
        color: {c['fg_dim']};
        background-color: {c['bg']};
    }}
    QTableWidget {{
        background-color: {c['bg_widget']};
        alternate-background-color: {c['bg_alt']};
        color: {c['fg']};
        gridline-color: {c['border']};
        border: 1px solid {c['border']};
        border-radius: 4px;
    }}
    QHeaderView::section {{
        background-color: {c['bg_alt']};
        color: {c['fg']};
        padding: 4px 8px;
        border: 1px solid {c['border']};
        font-weight: bold;
    }}
    QProgressBar {{
        background-color: {c['bg_input']};
        border: 1px solid {c['border']};
        border-radius: 4px;
        max-height: 8px;
    }}
    QProgressBar::chunk {{
        background-color: {c['accent']};
        border-radius: 3px;
    }}
    QStatusBar {{
        background-color: {c['bg_alt']};
        color: {c['fg_dim']};
        border-top: 1px solid {c['border']};
    }}
    QMenuBar {{
        background-color: {c['bg_alt']};
        color: {c['fg']};
    }}
    QMenuBar::item:selected, QMenu::item:selected {{
        background-color: {c['selection']};
    }}
    QMenu {{
        background-color: {c['bg_widget']};
        color: {c['fg']};
        border: 1px solid {c['border']};
    }}
    QLabel {{
        color: {c['fg']};
    }}
    QLabel#errorLabel {{
        color: {c['red']};
        border: 1px solid {c['red']};
        border-radius: 4px;
        padding: 6px;
    }}
    QLabel#varianceLabel {{
        color: {c['green']};
        font-weight: bold;
    }}
    """


def plot_style(for_export: bool = False) -> dict:
    """matplotlib style dict for the GUI (dark) or export (light) theme."""
    return PLOT_STYLE_LIGHT if for_export else PLOT_STYLE_DARK


def style_axes(ax, *, for_export: bool = False) -> None:
    """Colour *ax* (2-D or 3-D) and its figure for the chosen theme."""
    style = plot_style(for_export)
    ax.figure.set_facecolor(style['figure.facecolor'])
    ax.set_facecolor(style['axes.facecolor'])
    for spine in ax.spines.values():
        spine.set_edgecolor(style['axes.edgecolor'])
    ax.title.set_color(style['text.color'])
    ax.xaxis.label.set_color(style['axes.labelcolor'])
    ax.yaxis.label.set_color(style['axes.labelcolor'])
    ax.tick_params(axis='x', colors=style['xtick.color'],
                   labelsize=style['xtick.labelsize'])
    ax.tick_params(axis='y', colors=style['ytick.color'],
                   labelsize=style['ytick.labelsize'])
    zaxis = getattr(ax, 'zaxis', None)
    if zaxis is not None:
        zaxis.label.set_color(style['axes.labelcolor'])
        ax.tick_params(axis='z', colors=style['ytick.color'],
                       labelsize=style['ytick.labelsize'])
        for axis in (ax.xaxis, ax.yaxis, zaxis):
            axis.set_pane_color(style['axes.facecolor'])
