# Client module
