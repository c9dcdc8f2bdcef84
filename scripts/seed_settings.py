#!/usr/bin/env python3
"""Register SesPress options in DynamoDB.

Every option missing from the table is created, taking its value from the
matching SESPRESS_<OPTION> environment variable or an empty string.
Options that already exist are left untouched unless --overwrite is given.
"""

import argparse

from sespress.config import EnvironmentConfigurationStore
from sespress.models.settings import OPTION_NAMES, SECRET_OPTIONS
from sespress.repositories.settings import SettingsRepository


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Register SesPress settings")
    parser.add_argument("--stage", default="dev", help="Deployment stage")
    parser.add_argument("--table", help="Table name (defaults to sespress-<stage>)")
    parser.add_argument("--overwrite", action="store_true", help="Replace existing values from the environment")
    args = parser.parse_args()

    table_name = args.table or f"sespress-{args.stage}"
    print(f"Registering settings in table: {table_name}")

    repo = SettingsRepository(table_name=table_name)
    env = EnvironmentConfigurationStore()
    existing = repo.get_all()

    values = {}
    for name in OPTION_NAMES:
        env_value = env.get(name)
        if name not in existing:
            values[name] = env_value or ""
        elif args.overwrite and env_value is not None:
            values[name] = env_value

    if not values:
        print("All settings already registered")
        return

    repo.save(values)
    for name, value in values.items():
        shown = "********" if name in SECRET_OPTIONS and value else value
        print(f"  {name} = {shown!r}")

    print(f"Registered {len(values)} setting(s)")


if __name__ == "__main__":
    main()
