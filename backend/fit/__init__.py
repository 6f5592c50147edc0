"""
Viewport fitting: aligned (native) fits and pitch-aware screen-space fits.
"""
