"""Terminal front end for pitemp."""
