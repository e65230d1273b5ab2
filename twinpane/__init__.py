"""twinpane: dual-pane terminal file browser."""

__version__ = '0.4.0'
