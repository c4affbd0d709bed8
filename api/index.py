"""
Vercel Serverless Entry Point for the BreatheIndia dashboard.
This file exposes the Flask app as a Vercel serverless function.
"""
import sys
import os

# Add parent directory to path so we can import app
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

os.environ.setdefault('FLASK_ENV', 'production')

from app import app  # noqa: E402

# Vercel picks up the Flask object named 'app'
