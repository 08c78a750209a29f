"""Domain layer for Milepost.

Pure models and functions over the roadmap tree. Nothing in this
package performs I/O.
"""
