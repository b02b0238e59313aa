# create.py
from getpass import getpass
from tiklive import create_app
from tiklive.backend import get_backend
from tiklive.services.auth_service import provision_admin


def main():
    app = create_app()
    with app.app_context():
        email = input("Admin email: ").strip().lower()
        password = getpass("Password (leave blank to promote an existing user): ")

        user = provision_admin(get_backend(), email, password or None)
        print(f"Admin user {user.email} provisioned with permissions: {', '.join(user.permission_names)}")

if __name__ == "__main__":
    main()
