"""Bundle size benchmark across React Native bundler toolchains."""

__version__ = "0.1.0"
