"""Core image processing and pipeline modules for blurqueue."""
