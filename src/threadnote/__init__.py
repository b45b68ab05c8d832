"""
ThreadNote Backend - Threaded Note Taking Service

Notes with one level of replies, @id mentions between notes and cascade
deletion of threads.

Version: 1.0.0
"""

__version__ = "1.0.0"
