"""FastAPI server for sws-blog."""
