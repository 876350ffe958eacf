"""Storefront — WhatsApp-commerce catalogue, conversation carts, checkout and inventory."""
