"""
WSGI Entry Point for Signage CMS.
"""

from signage.app import create_app

application = create_app()
app = application

if __name__ == "__main__":
    application.run()
