[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netdump"
version = "0.1.0"
description = "Packet capture record formats and a UDP traffic dumper"
requires-python = ">=3.10"
dependencies = []
keywords = ["pcap", "packet capture", "udp", "network", "sll", "vlan", "usb"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
udpdump = "netdump.udpdump:main"

[tool.hatch.build.targets.wheel]
packages = ["netdump"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
