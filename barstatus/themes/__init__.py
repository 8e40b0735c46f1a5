"""Themes, widget states, colors and separators."""