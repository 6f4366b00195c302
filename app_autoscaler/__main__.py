"""
Entry point for `python -m app_autoscaler` and container deployments.
"""

from app_autoscaler.main import main

if __name__ == '__main__':
    main()
