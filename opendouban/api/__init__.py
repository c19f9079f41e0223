"""
Open Douban HTTP API

FastAPI surface exposing the metadata provider to a host media library.
"""
