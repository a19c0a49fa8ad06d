"""
Desktop UI for the Bird Sightings API.

    columns.py    table column definitions and cell text
    presenter.py  user actions, input parsing, background dispatch
    view.py       Tkinter widgets
    app.py        `birdapi-ui` entry point

Only view.py imports tkinter, so the rest can be tested headless.
"""
