"""Подсистема безопасности: дескрипторы алгоритмов IPsec."""
