"""
HR Kernel

Pure business logic behind the HR front-end:
- GOSI social-insurance contribution types
- Multi-stage approval routing types for leave, loan and travel requests
- Typed exceptions and structured logging
"""

__version__ = "0.1.0"
