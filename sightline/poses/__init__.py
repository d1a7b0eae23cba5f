"""COLMAP text model records, decoders and sources."""
