# Generator module
