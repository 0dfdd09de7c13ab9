"""Weather Insights server: weather lookup proxy and frontend asset host."""

__version__ = "0.1.0"
