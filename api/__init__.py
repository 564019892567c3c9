"""
Module 07 - Minimal API (FastAPI)

HTTP API for the shielded pool:
- POST /pool/deposit - Insert a commitment
- POST /pool/withdraw - Withdraw with a Groth16 proof
- GET /pool/root, /pool/roots - Current root and root history
- GET /pool/nullifiers/{hash} - Spent check
- GET /pool/path/{index} - Merkle path for a leaf
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
