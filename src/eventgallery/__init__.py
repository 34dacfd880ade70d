"""
eventgallery - Live event photo wall with Streamlit

An application for publishing event photos as they are taken:
- Photo ingestion from camera capture or bulk upload
- Bounded JPEG transcoding for compact local storage
- Durable photo and settings stores with quota fallback
- Waterfall gallery layout for viewers
"""

__version__ = "0.1.0"
__author__ = "eventgallery"
__description__ = "Live event photo wall with Streamlit"
