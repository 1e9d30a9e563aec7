"""
PDF Analyzer Backend Application

Accepts uploaded PDF documents, extracts their text and hands it to an
Azure OpenAI assistant for analysis.

Features:
- Page-aware text chunking sized for assistant messages
- Azure OpenAI Assistants API integration
- Run polling with backoff, deadline and cancellation
- Guaranteed cleanup of staged uploads
- Structured error responses
"""

__version__ = "1.0.0"
__author__ = "PDF Analyzer Team"
__description__ = "Upload a PDF and get an AI assistant's analysis of it"
