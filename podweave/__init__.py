"""Extract POD from Perl sources and weave it into publishable documentation."""

__version__ = "0.1.0"
