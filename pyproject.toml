[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "osdemos"
version = "0.1.0"
description = "Small runnable demonstrations of operating-system concepts: processes, threads, locks, condition variables, semaphores, scheduling, files and sockets."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating systems",
    "concurrency",
    "threads",
    "semaphores",
    "condition variables",
    "scheduling",
    "education",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
osdemos-zemaphore = "osdemos.zemaphore:main"
osdemos-rwlock = "osdemos.rwlock:main"
osdemos-lottery = "osdemos.lottery:main"
osdemos-pc = "osdemos.boundedbuffer:main"
osdemos-dining = "osdemos.philosophers:main"
osdemos-pstack = "osdemos.pstack:main"
osdemos-udp-client = "osdemos.udp:client_main"
osdemos-udp-server = "osdemos.udp:server_main"
osdemos-processes = "osdemos.processes:main"
osdemos-intro = "osdemos.intro:main"
osdemos-threads = "osdemos.threadbasics:main"
osdemos-threadbugs = "osdemos.threadbugs:main"

[tool.setuptools.packages.find]
include = ["osdemos*"]

[tool.pytest.ini_options]
addopts = "-ra"
