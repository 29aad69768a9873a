#!/usr/bin/env python3
"""Full setup example: secrets, image, stack, and verification."""

import getpass
import sys

from jenkins_bootstrap import env, jenkins
from jenkins_bootstrap.config import get_config


def main():
    """Deploy Jenkins on a swarm with secrets-based admin credentials."""
    config = get_config()
    user = input("Admin user: ").strip()
    password = getpass.getpass("Admin password: ")

    print("\n1️⃣ Creating secrets...")
    env.create_secrets(user, password)

    print("\n2️⃣ Building image and deploying stack...")
    env.setup("build")

    print("\n3️⃣ Verifying...")
    checks = jenkins.verify(user, password)
    if not all(checks.values()):
        print("\n❌ Verification failed")
        sys.exit(1)

    print(f"\n📍 Access Jenkins at: {config.jenkins_url}")
    print("\n🧹 Run 'jb stack down --secrets' to clean up")


if __name__ == "__main__":
    main()
