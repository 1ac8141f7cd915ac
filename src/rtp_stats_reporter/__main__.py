"""
Allow running rtp_stats_reporter with python -m
"""

from .cli import main

if __name__ == '__main__':
    main()
