from delivery_fee.factory import create_app

app = create_app()
