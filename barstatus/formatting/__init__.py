"""Format templates, values, units, prefixes, formatters and update scheduling."""