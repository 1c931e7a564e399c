"""
remote_panel/api package marker.
"""
