from tategaki.app_factory import create_admin_app

app = create_admin_app()
