"""
church_api.storage

External storage boundaries (blob store for uploaded images).
"""

# Package marker.
