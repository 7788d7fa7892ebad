"""
Knowledge Base Chat

Data access for users, chat history and document chunks.
"""

__version__ = "1.0.0"
