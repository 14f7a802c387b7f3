"""
Foreign Key Example
===================

Sample application built on improved_api: a standalone Category
entity plus One / Many / ToOne records linked by foreign keys.
"""
