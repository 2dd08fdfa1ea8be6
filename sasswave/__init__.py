"""SassWave Create -- scaffold SassWave-ready React and Next.js projects."""

__version__ = "1.2.0"
