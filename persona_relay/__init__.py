# Persona Relay package
# Streams an upstream model's reply back to the caller, cleaned and
# optionally flavoured by a persona.

__version__ = "0.3.0"
