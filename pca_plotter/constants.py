"""
Constants for the PCA Plotter.

Centralises colour palettes, font families, accepted file types,
preview limits, chart canvas sizes and export settings.
"""

# ── Input files ──────────────────────────────────────────────────────────
ACCEPTED_EXTENSIONS = (".csv", ".xlsx", ".xls")
SPREADSHEET_EXTENSIONS = (".xlsx", ".xls")
FILE_DIALOG_FILTER = (
    f"Data Files ({' '.join('*' + ext for ext in ACCEPTED_EXTENSIONS)});;"
    "CSV Files (*.csv);;"
    "Excel Files (*.xlsx *.xls);;"
    "All Files (*)"
)

# Header row + 5 data rows
PREVIEW_MAX_ROWS = 6

# ── Multipart field expected by the PCA service ─────────────────────────
UPLOAD_FIELD_NAME = "datafile"

# ── Font family fallback chain ───────────────────────────────────────────
FONT_FAMILIES = [
    "Segoe UI", "DejaVu Sans", "Liberation Sans", "Noto Sans",
    "Ubuntu", "Helvetica", "Arial", "sans-serif",
]

# ── Dark Catppuccin-inspired GUI colour palette ──────────────────────────
DARK_COLORS = {
    'bg':           '#1e1e2e',
    'bg_alt':       '#252536',
    'bg_widget':    '#2a2a3c',
    'bg_input':     '#333348',
    'fg':           '#cdd6f4',
    'fg_dim':       '#9399b2',
    'accent':       '#89b4fa',
    'accent_hover': '#74c7ec',
    'green':        '#a6e3a1',
    'red':          '#f38ba8',
    'border':       '#45475a',
    'selection':    '#45475a',
}

# ── Series colours per encoding ──────────────────────────────────────────
SERIES_COLORS = {
    'scatter': 'blue',
    'bar':     'green',
    '3d':      'red',
}

# ── Chart canvas (pixels at CANVAS_DPI) ──────────────────────────────────
CANVAS_WIDTH_PX = 800
CANVAS_HEIGHT_PX = 600
CANVAS_DPI = 100
MARKER_SIZE_3D = 4

# Bar charts with more points than this drop their x tick labels
MAX_BAR_TICK_LABELS = 30

# ── Export settings ──────────────────────────────────────────────────────
EXPORT_DPI = 300
CLIPBOARD_DPI = 150

# ── Matplotlib dark-theme style dict (GUI preview) ──────────────────────
PLOT_STYLE_DARK = {
    'figure.facecolor':  DARK_COLORS['bg_alt'],
    'axes.facecolor':    DARK_COLORS['bg_widget'],
    'axes.edgecolor':    DARK_COLORS['border'],
    'axes.labelcolor':   DARK_COLORS['fg'],
    'text.color':        DARK_COLORS['fg'],
    'xtick.color':       DARK_COLORS['fg_dim'],
    'ytick.color':       DARK_COLORS['fg_dim'],
    'xtick.labelsize':   8,
    'ytick.labelsize':   8,
    'axes.labelsize':    9,
    'axes.titlesize':    11,
    'grid.color':        DARK_COLORS['border'],
}

# ── Matplotlib light-theme style dict (export) ──────────────────────────
PLOT_STYLE_LIGHT = {
    'figure.facecolor':  '#ffffff',
    'axes.facecolor':    '#ffffff',
    'axes.edgecolor':    '#333333',
    'axes.labelcolor':   '#1a1a2e',
    'text.color':        '#1a1a2e',
    'xtick.color':       '#333333',
    'ytick.color':       '#333333',
    'xtick.labelsize':   8,
    'ytick.labelsize':   8,
    'axes.labelsize':    9,
    'axes.titlesize':    11,
    'grid.color':        '#cccccc',
}
