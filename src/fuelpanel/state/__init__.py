"""State layer.

Date window, cache keys, the price record store and the change tracker.
Everything here is independent of any rendering framework; the panel in
:mod:`fuelpanel.panel` wires the pieces together.
"""
