"""Pure business rules with no I/O.

- **documents**: Brazilian document masks, validators and document numbering
- **roles**: back-office roles and role fallback rules
- **orders**: order lifecycle states
- **sharing**: WhatsApp share links and PDF export file names
- **tracking**: carrier event normalisation and delivery status classification
"""
