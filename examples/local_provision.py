#!/usr/bin/env python3
"""Local example: provision a controller home from two secret files."""

import os
import tempfile
from pathlib import Path

from jenkins_bootstrap import bootstrap


def main():
    """Write secret files, run the provisioner twice, and try some logins."""
    work = Path(tempfile.mkdtemp(prefix="jenkins-bootstrap-"))
    user_file = work / "jenkins-user"
    pass_file = work / "jenkins-pass"
    user_file.write_text("admin\n")
    pass_file.write_text("admin\n")

    os.environ["JENKINS_ADMIN_USER_FILE"] = str(user_file)
    os.environ["JENKINS_ADMIN_PASSWORD_FILE"] = str(pass_file)

    print("1️⃣ First start...")
    instance = bootstrap.bootstrap(work / "home")

    print("\n2️⃣ Restart with the same secrets...")
    instance = bootstrap.bootstrap(work / "home")

    print("\n3️⃣ Requests:")
    for path, user, password in [
        ("/manage", "admin", "admin"),
        ("/manage", "admin", "wrong"),
        ("/manage", None, None),
        ("/setupWizard/", None, None),
    ]:
        print(f"   {path} as {user or 'anonymous'} -> {instance.handle_request(path, user, password)}")

    print(f"\n📁 State written to {instance.state_path}")


if __name__ == "__main__":
    main()
