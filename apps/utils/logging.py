import logging
import json
import datetime


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line, for log shippers.

    Structured messages (dict msg or dict args) have credential-like keys
    redacted at any depth, so a logged request body never leaks a password
    or a seller's trade license.
    """

    SENSITIVE_KEYS = {
        'password', 'token', 'secret', 'authorization',
        'trade_license', 'tradelicense',
    }
    REDACTED = '***REDACTED***'

    # `extra=` fields copied to the top level when present
    CONTEXT_FIELDS = ('order_id', 'application_id', 'email', 'product_count')

    def _scrub(self, data):
        if isinstance(data, dict):
            return {
                k: self.REDACTED if str(k).lower() in self.SENSITIVE_KEYS else self._scrub(v)
                for k, v in data.items()
            }
        if isinstance(data, (list, tuple)):
            return [self._scrub(i) for i in data]
        return data

    def format(self, record):
        if isinstance(record.msg, dict):
            record.msg = self._scrub(record.msg)
        if isinstance(record.args, dict):
            record.args = self._scrub(record.args)

        log_record = {
            "ts": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "lvl": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
            "path": record.pathname,
            "line": record.lineno,
        }

        for field in self.CONTEXT_FIELDS:
            if hasattr(record, field):
                log_record[field] = getattr(record, field)

        if record.exc_info:
            exc = record.exc_info[1]
            # ShopError and subclasses carry a machine code
            if getattr(exc, 'code', None):
                log_record['code'] = exc.code
            log_record['exc'] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=str)
