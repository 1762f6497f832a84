"""Cookie Scanner — enumerate and classify the cookies a website sets."""

__version__ = "1.0.0"
