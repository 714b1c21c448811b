"""
Hardware Layer

Low-level device access only:

- UVC cameras (descriptor sources)
- Keyboard input adapters
"""
