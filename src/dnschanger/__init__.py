"""DNS Changer - view and change a host's DNS resolvers."""

__version__ = "0.2.0"
