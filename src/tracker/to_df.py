import pandas as pd

from tracker.grouping import as_records


class TransactionsToDf:

    def __init__(self, pairs):
        self.records = as_records(pairs)
        self.dfs = {}

    def pairs_to_df(self):
        df = pd.DataFrame(self.records, columns=['from_pid', 'to_pid'])
        df = df.groupby(['from_pid', 'to_pid'], sort=False).size().reset_index(name='count')
        self.dfs['pairs'] = df
        return df

    def groups_to_df(self, table):
        rows = [
            {"pid": pid, "size": len(members), "neighbors": " ".join(str(m) for m in members)}
            for pid, members in table.items()
        ]
        df = pd.DataFrame(rows, columns=['pid', 'size', 'neighbors']).set_index('pid')
        self.dfs['groups'] = df
        return df

    def result_to_df(self, target_pid, depths):
        rows = [{"pid": pid, "depth": depth} for pid, depth in depths.items()]
        df = pd.DataFrame(rows, columns=['pid', 'depth']).set_index('pid')
        self.dfs[f'result_{target_pid}'] = df
        return df

    def export_dfs(self, output_path):
        for name, df in self.dfs.items():
            df.to_csv(f'{output_path}/{name}.csv')
