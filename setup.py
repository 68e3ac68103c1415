import re
import sys
from pathlib import Path

from setuptools import find_packages, setup

CURRENT_DIR = Path(sys.argv[0] if __name__ == "__main__" else __file__).resolve().parent


def read_reqs(reqs_path: Path):
    return re.findall(r"(^[^#-][\w]+[-~>=<.\w]+)", reqs_path.read_text(), re.MULTILINE)


# -----------------------------------------------------------------

INSTALL_REQUIREMENTS = tuple(read_reqs(CURRENT_DIR / "requirements" / "_base.txt"))

TEST_REQUIREMENTS = tuple(read_reqs(CURRENT_DIR / "requirements" / "_test.txt"))

SETUP = dict(
    name="docker-compose-agent",
    version="0.1.0",
    description="Agent that serializes services into docker-compose files and merges them safely",
    packages=find_packages(where="src"),
    package_dir={
        "": "src",
    },
    entry_points={
        "console_scripts": [
            "docker-compose-agent = docker_compose_agent.cli:main",
        ]
    },
    python_requires=">=3.9",
    install_requires=INSTALL_REQUIREMENTS,
    tests_require=TEST_REQUIREMENTS,
    extras_require={"test": TEST_REQUIREMENTS},
)

if __name__ == "__main__":
    setup(**SETUP)
