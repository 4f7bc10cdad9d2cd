from studypdf.version import __version__  # noqa: F401
