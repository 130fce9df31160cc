# app/__init__.py
"""
Backend de Sparks: discovery de perfiles, likes → matches y chat en vivo.

Cada feature vive en su carpeta (models / repository / service / schemas /
router); los services reciben la AsyncSession por parámetro.
"""
