"""
Use Cases

Organized into domain folders:
- visits/: Visit creation, gate scans and lifecycle
- bans/: Visitor bans
- visitors/: Visitor ratings
- buildings/: License usage
"""
