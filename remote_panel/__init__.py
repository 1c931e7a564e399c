"""
remote_panel package marker.
"""
