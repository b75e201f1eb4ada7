"""WSGI entry point.

WSGI 서버 설정에서 이 파일을 import합니다:

    from wsgi import application
"""

from src.web.app import create_app

application = create_app()
