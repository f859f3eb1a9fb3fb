#!/usr/bin/env python3
"""Start a Celery worker consuming the catalog import queue."""

import sys
import warnings

# Containers run the worker as root
warnings.filterwarnings('ignore', category=UserWarning, message='.*superuser privileges.*')
warnings.filterwarnings('ignore', category=RuntimeWarning, message='.*superuser privileges.*')

from catalog_import.workers.celery_app import celery_app

if __name__ == '__main__':
    # Imports run sequentially; a solo pool keeps one import at a time
    celery_app.worker_main(
        argv=[
            'worker',
            '--loglevel=info',
            '--queues=imports',
            '--pool=solo',
            '--without-mingle',
            '--without-gossip',
        ] + sys.argv[1:]
    )
