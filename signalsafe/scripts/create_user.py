"""
Create a user, or change the admin flag of an existing one. Run from project root:
  python -m signalsafe.scripts.create_user EMAIL PASSWORD [--admin]
  python -m signalsafe.scripts.create_user EMAIL --set-admin {true,false}
Uses the local identity provider; with a hosted provider, set the flag in the
users table directly.
"""
import argparse
import sys

from signalsafe.core.config import get_settings
from signalsafe.core.database import SessionLocal
from signalsafe.core.security import PASSWORD_MIN_LEN, is_valid_email, is_valid_password
from signalsafe.services.identity import EmailAlreadyRegisteredError, LocalIdentityProvider
from signalsafe.services.store import RelationalStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a SignalSafe user or set its admin flag.")
    parser.add_argument("email", help="E-mail address of the user")
    parser.add_argument("password", nargs="?", help=f"Password (min. {PASSWORD_MIN_LEN} chars)")
    parser.add_argument("--admin", action="store_true", help="Create the user as administrator")
    parser.add_argument(
        "--set-admin",
        choices=["true", "false"],
        help="Change the admin flag of an existing user instead of creating one",
    )
    args = parser.parse_args(argv)

    email = args.email.strip()
    if not is_valid_email(email):
        print("Invalid e-mail address.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        store = RelationalStore(db)
        if args.set_admin is not None:
            user = store.find_user_by_email(email)
            if user is None:
                print(f"User '{email}' not found.", file=sys.stderr)
                return 1
            store.set_admin(user.id, args.set_admin == "true")
            print(f"User '{email}' is_admin={args.set_admin}.")
            return 0

        if not args.password or not is_valid_password(args.password):
            print(f"Password must have at least {PASSWORD_MIN_LEN} characters.", file=sys.stderr)
            return 1
        if store.find_user_by_email(email) is not None:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        provider = LocalIdentityProvider(db, get_settings())
        try:
            identity = provider.sign_up(email, args.password)
        except EmailAlreadyRegisteredError:
            print(f"Identity '{email}' already exists.", file=sys.stderr)
            return 1
        store.insert_user(identity.id, email, user_name=email, is_admin=args.admin)
        role = "admin" if args.admin else "user"
        print(f"Created user '{email}' ({identity.id}) with role '{role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
