"""
remote_panel/scheduler package marker.
"""
