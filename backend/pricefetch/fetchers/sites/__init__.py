"""Site profiles. One module per site; each exposes ``PROFILE``."""
