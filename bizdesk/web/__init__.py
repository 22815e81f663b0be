"""Server-rendered web pages and their layout shell."""
